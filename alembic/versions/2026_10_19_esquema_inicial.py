"""Esquema inicial de Contador Virtual

Revision ID: esquema_inicial_2026_10_19
Revises:
Create Date: 2026-10-19

Tablas:
- roles, usuarios
- companies, company_members, storage_usage
- comprobantes, comprobante_items, upload_history, terceros
- system_settings, ai_usage_logs
- alert_configs, scraped_licitaciones, licitacion_etapas,
  licitacion_notificaciones, alert_history
- inventarios, inventario_items
"""
from alembic import op
import sqlalchemy as sa


revision = 'esquema_inicial_2026_10_19'
down_revision = None
branch_labels = None
depends_on = None

# SQLite solo autoincrementa INTEGER PRIMARY KEY
PK = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def _pk():
    return sa.Column('id', PK, primary_key=True, autoincrement=True)


def _creado_en():
    return sa.Column('creado_en', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade():
    # ---------------------------------------------------------------- usuarios
    op.create_table(
        'roles',
        _pk(),
        sa.Column('nombre', sa.String(50), nullable=False, unique=True),
    )
    op.create_table(
        'usuarios',
        _pk(),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('nombre', sa.String(150)),
        sa.Column('telefono', sa.String(50)),
        sa.Column('activo', sa.Boolean(), server_default=sa.text('1'), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('role_id', PK, sa.ForeignKey('roles.id', onupdate='CASCADE', ondelete='RESTRICT'), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=True),
        _creado_en(),
    )

    # ---------------------------------------------------------------- empresas
    op.create_table(
        'companies',
        _pk(),
        sa.Column('ruc', sa.String(11), nullable=False, unique=True, comment='RUC de la empresa (11 dígitos)'),
        sa.Column('razon_social', sa.String(255), nullable=False),
        sa.Column('nombre_comercial', sa.String(255), nullable=True),
        sa.Column('direccion', sa.String(500), nullable=True),
        sa.Column('regimen', sa.String(50), nullable=True, comment='RG, MYPE, RER, NRUS'),
        sa.Column('logo_base64', sa.Text(), nullable=True),
        sa.Column('certificado_digital', sa.Text(), nullable=True),
        sa.Column('firma_digital_base64', sa.Text(), nullable=True),
        sa.Column('huella_digital_base64', sa.Text(), nullable=True),
        sa.Column('owner_id', PK, sa.ForeignKey('usuarios.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('activo', sa.Boolean(), server_default=sa.text('1'), nullable=False),
        _creado_en(),
    )
    op.create_table(
        'company_members',
        _pk(),
        sa.Column('company_id', PK, sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('usuario_id', PK, sa.ForeignKey('usuarios.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('rol', sa.String(20), nullable=False, comment='OWNER, ADMIN, CONTADOR, VIEWER'),
        _creado_en(),
        sa.UniqueConstraint('company_id', 'usuario_id', name='uq_company_member'),
    )
    op.create_table(
        'storage_usage',
        _pk(),
        sa.Column('company_id', PK, sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('logos_size', sa.BigInteger(), nullable=False),
        sa.Column('certificates_size', sa.BigInteger(), nullable=False),
        sa.Column('generated_files_size', sa.BigInteger(), nullable=False),
        sa.Column('total_size', sa.BigInteger(), nullable=False),
        sa.Column('max_storage', sa.BigInteger(), nullable=False, comment='Límite en bytes'),
        sa.Column('last_calculated', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # ------------------------------------------------------------ comprobantes
    op.create_table(
        'comprobantes',
        _pk(),
        sa.Column('company_id', PK, sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('tipo', sa.String(10), nullable=False),
        sa.Column('tipo_documento', sa.String(2), nullable=False),
        sa.Column('serie', sa.String(10), nullable=False),
        sa.Column('numero', sa.String(20), nullable=False),
        sa.Column('fecha_emision', sa.Date(), nullable=False),
        sa.Column('fecha_vencimiento', sa.Date(), nullable=True),
        sa.Column('periodo', sa.String(6), nullable=False, comment='Período tributario YYYYMM'),
        sa.Column('ruc_emisor', sa.String(11), nullable=False),
        sa.Column('razon_social_emisor', sa.String(255), nullable=True),
        sa.Column('direccion_emisor', sa.String(500), nullable=True),
        sa.Column('tipo_doc_receptor', sa.String(2), nullable=True),
        sa.Column('numero_doc_receptor', sa.String(20), nullable=True),
        sa.Column('razon_social_receptor', sa.String(255), nullable=True),
        sa.Column('tipo_doc_tercero', sa.String(2), nullable=True),
        sa.Column('ruc_tercero', sa.String(20), nullable=True, index=True),
        sa.Column('razon_social_tercero', sa.String(255), nullable=True),
        sa.Column('moneda', sa.String(3), nullable=False),
        sa.Column('base_imponible', sa.Numeric(14, 2), nullable=False),
        sa.Column('igv', sa.Numeric(14, 2), nullable=False),
        sa.Column('total', sa.Numeric(14, 2), nullable=False),
        sa.Column('es_gravada', sa.Boolean(), nullable=False),
        sa.Column('afecta_igv', sa.Boolean(), nullable=False),
        sa.Column('es_exportacion', sa.Boolean(), nullable=False),
        sa.Column('observaciones', sa.Text(), nullable=True),
        sa.Column('hash_resumen', sa.String(255), nullable=True),
        sa.Column('xml_firmado', sa.Text(), nullable=True),
        sa.Column('cdr_base64', sa.Text(), nullable=True),
        sa.Column('estado', sa.String(10), nullable=False),
        _creado_en(),
        sa.UniqueConstraint('company_id', 'tipo_documento', 'serie', 'numero', name='uq_comprobante_documento'),
    )
    op.create_index('ix_comprobantes_company_periodo', 'comprobantes', ['company_id', 'periodo'])

    op.create_table(
        'comprobante_items',
        _pk(),
        sa.Column('comprobante_id', PK, sa.ForeignKey('comprobantes.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('numero_linea', sa.Integer(), nullable=False),
        sa.Column('cantidad', sa.Numeric(14, 4), nullable=False),
        sa.Column('unidad_medida', sa.String(10), nullable=False),
        sa.Column('descripcion', sa.String(1000), nullable=False),
        sa.Column('codigo_producto', sa.String(100), nullable=True),
        sa.Column('precio_unitario', sa.Numeric(14, 4), nullable=False),
        sa.Column('valor_venta', sa.Numeric(14, 2), nullable=False),
        sa.Column('igv', sa.Numeric(14, 2), nullable=False),
        sa.Column('total', sa.Numeric(14, 2), nullable=False),
    )
    op.create_table(
        'upload_history',
        _pk(),
        sa.Column('company_id', PK, sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('usuario_id', PK, sa.ForeignKey('usuarios.id', ondelete='SET NULL'), nullable=True),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_type', sa.String(10), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('total', sa.Integer(), nullable=False),
        sa.Column('imported', sa.Integer(), nullable=False),
        sa.Column('duplicated', sa.Integer(), nullable=False),
        sa.Column('errors', sa.Integer(), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=True),
        _creado_en(),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_table(
        'terceros',
        _pk(),
        sa.Column('tipo_documento', sa.String(2), nullable=False),
        sa.Column('numero_documento', sa.String(15), nullable=False, unique=True),
        sa.Column('razon_social', sa.String(255), nullable=False),
        sa.Column('nombre_comercial', sa.String(255), nullable=True),
        sa.Column('direccion', sa.String(500), nullable=True),
        sa.Column('ubigeo', sa.String(6), nullable=True),
        sa.Column('departamento', sa.String(100), nullable=True),
        sa.Column('provincia', sa.String(100), nullable=True),
        sa.Column('distrito', sa.String(100), nullable=True),
        sa.Column('estado', sa.String(50), nullable=True),
        sa.Column('condicion', sa.String(50), nullable=True),
        sa.Column('es_agente_retencion', sa.Boolean(), nullable=False),
        sa.Column('es_buen_contribuyente', sa.Boolean(), nullable=False),
        sa.Column('fuente', sa.String(50), nullable=True),
        _creado_en(),
        sa.Column('actualizado_en', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # ---------------------------------------------------------- configuración
    op.create_table(
        'system_settings',
        _pk(),
        sa.Column('key', sa.String(100), nullable=False, unique=True),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('category', sa.String(20), nullable=False, index=True),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('is_encrypted', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        'ai_usage_logs',
        _pk(),
        sa.Column('usuario_id', PK, sa.ForeignKey('usuarios.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('company_id', PK, sa.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True),
        sa.Column('provider', sa.String(20), nullable=False),
        sa.Column('model', sa.String(100), nullable=False),
        sa.Column('prompt_type', sa.String(50), nullable=False),
        sa.Column('input_tokens', sa.Integer(), nullable=False),
        sa.Column('output_tokens', sa.Integer(), nullable=False),
        sa.Column('total_tokens', sa.Integer(), nullable=False),
        sa.Column('response_time_ms', sa.Integer(), nullable=False),
        sa.Column('success', sa.Boolean(), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=True),
        _creado_en(),
    )

    # ---------------------------------------------------------------- alertas
    op.create_table(
        'alert_configs',
        _pk(),
        sa.Column('usuario_id', PK, sa.ForeignKey('usuarios.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('nombre', sa.String(150), nullable=True),
        sa.Column('tipo', sa.String(30), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('1'), nullable=False),
        sa.Column('regiones', sa.JSON(), nullable=False),
        sa.Column('entidades', sa.JSON(), nullable=False),
        sa.Column('palabras_clave', sa.JSON(), nullable=False),
        sa.Column('monto_minimo', sa.Numeric(16, 2), nullable=True),
        sa.Column('monto_maximo', sa.Numeric(16, 2), nullable=True),
        sa.Column('dias_anticipacion', sa.JSON(), nullable=False),
        sa.Column('email_destino', sa.String(255), nullable=True),
        _creado_en(),
    )
    op.create_table(
        'scraped_licitaciones',
        _pk(),
        sa.Column('nomenclatura', sa.String(255), nullable=False, index=True),
        sa.Column('objeto_contratacion', sa.Text(), nullable=False),
        sa.Column('entidad', sa.String(255), nullable=False),
        sa.Column('sigla_entidad', sa.String(50), nullable=True),
        sa.Column('region', sa.String(100), nullable=True),
        sa.Column('valor_referencial', sa.Numeric(16, 2), nullable=True),
        sa.Column('moneda', sa.String(3), nullable=True),
        sa.Column('estado', sa.String(20), nullable=False),
        sa.Column('fuente', sa.String(50), nullable=False),
        sa.Column('url_origen', sa.String(1000), nullable=True),
        sa.Column('scraped_at', sa.DateTime(), server_default=sa.func.now(), nullable=False, index=True),
    )
    op.create_table(
        'licitacion_etapas',
        _pk(),
        sa.Column('licitacion_id', PK, sa.ForeignKey('scraped_licitaciones.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('nombre_etapa', sa.String(255), nullable=False),
        sa.Column('fecha_inicio', sa.Date(), nullable=True),
        sa.Column('fecha_fin', sa.Date(), nullable=True, index=True),
    )
    op.create_table(
        'licitacion_notificaciones',
        _pk(),
        sa.Column('licitacion_id', PK, sa.ForeignKey('scraped_licitaciones.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('alert_config_id', PK, sa.ForeignKey('alert_configs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('tipo_notificacion', sa.String(30), nullable=False),
        sa.Column('etapa_notificada', sa.String(255), nullable=True),
        sa.Column('enviado_en', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        'alert_history',
        _pk(),
        sa.Column('alert_config_id', PK, sa.ForeignKey('alert_configs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('titulo', sa.String(500), nullable=False),
        sa.Column('contenido', sa.Text(), nullable=True),
        sa.Column('fuente', sa.String(50), nullable=True),
        sa.Column('entidad', sa.String(255), nullable=True),
        sa.Column('region', sa.String(100), nullable=True),
        sa.Column('monto', sa.Numeric(16, 2), nullable=True),
        sa.Column('url_origen', sa.String(1000), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('is_notified', sa.Boolean(), nullable=False),
        sa.Column('notified_at', sa.DateTime(timezone=True), nullable=True),
        _creado_en(),
    )

    # ------------------------------------------------------------- inventarios
    op.create_table(
        'inventarios',
        _pk(),
        sa.Column('usuario_id', PK, sa.ForeignKey('usuarios.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('company_id', PK, sa.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('nombre', sa.String(255), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=True),
        sa.Column('fecha_inventario', sa.Date(), nullable=False),
        sa.Column('codigo_economato', sa.String(20), nullable=False),
        sa.Column('almacen_desc', sa.String(255), nullable=True),
        sa.Column('total_items', sa.Integer(), nullable=False),
        sa.Column('total_inventario_importe', sa.Numeric(16, 2), nullable=False),
        sa.Column('total_kardex_importe', sa.Numeric(16, 2), nullable=False),
        sa.Column('total_sobrantes_importe', sa.Numeric(16, 2), nullable=False),
        sa.Column('total_faltantes_importe', sa.Numeric(16, 2), nullable=False),
        _creado_en(),
    )
    op.create_table(
        'inventario_items',
        _pk(),
        sa.Column('inventario_id', PK, sa.ForeignKey('inventarios.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('codigo_bien', sa.String(50), nullable=False),
        sa.Column('descripcion', sa.String(500), nullable=False),
        sa.Column('unidad_medida', sa.String(50), nullable=True),
        sa.Column('inventario_unidad', sa.Numeric(16, 4), nullable=False),
        sa.Column('inventario_importe', sa.Numeric(16, 2), nullable=False),
        sa.Column('kardex_unidad', sa.Numeric(16, 4), nullable=False),
        sa.Column('kardex_importe', sa.Numeric(16, 2), nullable=False),
        sa.Column('costo_unitario', sa.Numeric(16, 4), nullable=False),
        sa.Column('sobrantes_unidad', sa.Numeric(16, 4), nullable=False),
        sa.Column('sobrantes_importe', sa.Numeric(16, 2), nullable=False),
        sa.Column('faltantes_unidad', sa.Numeric(16, 4), nullable=False),
        sa.Column('faltantes_importe', sa.Numeric(16, 2), nullable=False),
    )

    print("[OK] Esquema inicial creado")


def downgrade():
    """
    Elimina todas las tablas.

    ADVERTENCIA: Solo usar en desarrollo/staging.
    """
    for table in (
        'inventario_items', 'inventarios',
        'alert_history', 'licitacion_notificaciones', 'licitacion_etapas',
        'scraped_licitaciones', 'alert_configs',
        'ai_usage_logs', 'system_settings',
        'terceros', 'upload_history', 'comprobante_items',
    ):
        op.drop_table(table)
    op.drop_index('ix_comprobantes_company_periodo', table_name='comprobantes')
    for table in ('comprobantes', 'storage_usage', 'company_members', 'companies', 'usuarios', 'roles'):
        op.drop_table(table)
