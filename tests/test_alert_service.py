"""
Tests del servicio de alertas de licitaciones y de sus endpoints.
"""
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from contador.models.alerta import (
    AlertConfig, AlertHistory, LicitacionEtapa, LicitacionNotificacion, ScrapedLicitacion
)
from contador.services.alert_service import check_pending_alerts, notify_new_licitaciones

HOY = date(2024, 5, 6)


class FakeEmailService:
    """Registra los envíos en memoria"""

    def __init__(self, success=True):
        self.success = success
        self.enviados = []

    def send_email(self, to_email, subject, body_html, body_text=None):
        self.enviados.append({"to": to_email, "subject": subject, "html": body_html})
        if self.success:
            return {"success": True, "recipients": [to_email]}
        return {"success": False, "error": "SMTP caído"}


def _crear_licitacion(db, nomenclatura="LP-1-2024-MINSA", dias_fin=(3,), scraped_at=None, **kwargs):
    licitacion = ScrapedLicitacion(
        nomenclatura=nomenclatura,
        objeto_contratacion=kwargs.pop("objeto", "Adquisición de equipos de cómputo"),
        entidad=kwargs.pop("entidad", "Ministerio de Salud"),
        sigla_entidad="MINSA",
        region=kwargs.pop("region", "LIMA"),
        valor_referencial=kwargs.pop("valor", Decimal("150000")),
        url_origen="https://prod2.seace.gob.pe/proceso/1",
        scraped_at=scraped_at or datetime(2024, 5, 1, 8, 0),
    )
    for i, dias in enumerate(dias_fin):
        licitacion.etapas.append(
            LicitacionEtapa(nombre_etapa=f"Etapa {i + 1}", fecha_fin=HOY + timedelta(days=dias))
        )
    db.add(licitacion)
    db.commit()
    db.refresh(licitacion)
    return licitacion


def _crear_config(db, usuario, **kwargs):
    config = AlertConfig(usuario_id=usuario.id, **kwargs)
    db.add(config)
    db.commit()
    db.refresh(config)
    return config


@pytest.mark.integration
class TestVencimientos:

    @pytest.mark.filterwarnings("error::DeprecationWarning:contador")
    def test_envia_un_email_por_destinatario(self, db, contador_user):
        _crear_config(db, contador_user, regiones=["LIMA"], dias_anticipacion=[3, 1])
        _crear_licitacion(db, dias_fin=(3, 1, 10))
        _crear_licitacion(db, nomenclatura="LP-2-2024-MINSA", dias_fin=(1,))
        fake = FakeEmailService()

        result = check_pending_alerts(db, hoy=HOY, email_service=fake)

        assert result["checked"] == 2
        assert result["alerts_generated"] == 3
        assert result["emails_sent"] == 1
        assert result["errors"] == []
        assert len(fake.enviados) == 1
        assert fake.enviados[0]["to"] == "contador@estudio.pe"
        assert "URGENTE" in fake.enviados[0]["html"]
        assert db.query(LicitacionNotificacion).count() == 3
        assert db.query(AlertHistory).filter(AlertHistory.is_notified.is_(True)).count() == 3

    def test_no_repite_notificaciones(self, db, contador_user):
        _crear_config(db, contador_user, dias_anticipacion=[3])
        _crear_licitacion(db, dias_fin=(3,))
        fake = FakeEmailService()

        check_pending_alerts(db, hoy=HOY, email_service=fake)
        segunda = check_pending_alerts(db, hoy=HOY, email_service=fake)

        assert segunda["alerts_generated"] == 0
        assert len(fake.enviados) == 1

    def test_email_destino_propio(self, db, contador_user):
        _crear_config(db, contador_user, dias_anticipacion=[3], email_destino="licitaciones@estudio.pe")
        _crear_licitacion(db, dias_fin=(3,))
        fake = FakeEmailService()

        check_pending_alerts(db, hoy=HOY, email_service=fake)

        assert fake.enviados[0]["to"] == "licitaciones@estudio.pe"

    def test_filtros_y_config_inactiva(self, db, contador_user, otro_user):
        _crear_config(db, contador_user, dias_anticipacion=[3], monto_maximo=Decimal("1000"))
        _crear_config(db, otro_user, dias_anticipacion=[3], is_active=False)
        _crear_licitacion(db, dias_fin=(3,))
        fake = FakeEmailService()

        result = check_pending_alerts(db, hoy=HOY, email_service=fake)

        assert result["alerts_generated"] == 0
        assert fake.enviados == []

    def test_fallo_de_envio_no_registra(self, db, contador_user):
        _crear_config(db, contador_user, dias_anticipacion=[3])
        _crear_licitacion(db, dias_fin=(3,))

        result = check_pending_alerts(db, hoy=HOY, email_service=FakeEmailService(success=False))

        assert result["emails_sent"] == 0
        assert result["errors"] == ["Error enviando a contador@estudio.pe: SMTP caído"]
        assert db.query(LicitacionNotificacion).count() == 0


@pytest.mark.integration
class TestNuevas:

    def test_registra_en_historial_una_vez(self, db, contador_user):
        ahora = datetime(2024, 5, 6, 12, 0)
        _crear_config(db, contador_user, palabras_clave=["cómputo"], monto_maximo=Decimal("1000"))
        _crear_licitacion(db, scraped_at=ahora - timedelta(hours=2))
        _crear_licitacion(db, nomenclatura="LP-VIEJA", scraped_at=ahora - timedelta(days=3))

        result = notify_new_licitaciones(db, ahora=ahora)
        assert result == {"new_found": 1, "notified": 1, "errors": []}

        historial = db.query(AlertHistory).one()
        assert historial.titulo == "🆕 Nueva licitación: LP-1-2024-MINSA"
        assert historial.is_read is False

        assert notify_new_licitaciones(db, ahora=ahora)["new_found"] == 0


@pytest.mark.integration
class TestEndpoints:

    def test_crud(self, client, auth_headers):
        r = client.post(
            "/api/v1/alertas",
            json={"nombre": "TI", "regiones": ["LIMA"], "palabras_clave": ["cómputo"]},
            headers=auth_headers,
        )
        assert r.status_code == 201
        config = r.json()
        assert config["dias_anticipacion"] == [7, 3, 1, 0]

        r = client.put(
            f"/api/v1/alertas/{config['id']}",
            json={"dias_anticipacion": [5]},
            headers=auth_headers,
        )
        assert r.status_code == 200
        assert r.json()["dias_anticipacion"] == [5]
        assert r.json()["regiones"] == ["LIMA"]

        assert len(client.get("/api/v1/alertas", headers=auth_headers).json()) == 1

        r = client.delete(f"/api/v1/alertas/{config['id']}", headers=auth_headers)
        assert r.status_code == 204
        assert client.get("/api/v1/alertas", headers=auth_headers).json() == []

    def test_montos_invertidos(self, client, auth_headers):
        r = client.post(
            "/api/v1/alertas",
            json={"monto_minimo": 5000, "monto_maximo": 100},
            headers=auth_headers,
        )
        assert r.status_code == 400
        assert r.json()["detail"] == "El monto mínimo no puede ser mayor al monto máximo"

    def test_no_puede_editar_alerta_ajena(self, client, db, otro_user, auth_headers):
        ajena = _crear_config(db, otro_user)
        r = client.put(f"/api/v1/alertas/{ajena.id}", json={"nombre": "x"}, headers=auth_headers)
        assert r.status_code == 404
        assert r.json()["detail"] == "Alerta no encontrada"

    def test_historial_solo_propio(self, client, db, contador_user, otro_user, auth_headers):
        propia = _crear_config(db, contador_user)
        ajena = _crear_config(db, otro_user)
        db.add_all([
            AlertHistory(alert_config_id=propia.id, titulo="Leída", is_read=True),
            AlertHistory(alert_config_id=propia.id, titulo="Nueva"),
            AlertHistory(alert_config_id=ajena.id, titulo="Ajena"),
        ])
        db.commit()

        r = client.get("/api/v1/alertas/history", headers=auth_headers)
        assert {h["titulo"] for h in r.json()} == {"Leída", "Nueva"}

        r = client.get("/api/v1/alertas/history?solo_no_leidas=true", headers=auth_headers)
        assert [h["titulo"] for h in r.json()] == ["Nueva"]

    def test_run_manual_requiere_superadmin(self, client, auth_headers, superadmin_headers):
        assert client.post("/api/v1/admin/alertas/run", headers=auth_headers).status_code == 403

        r = client.post("/api/v1/admin/alertas/run", headers=superadmin_headers)
        assert r.status_code == 200
        body = r.json()
        assert body["vencimientos"]["alerts_generated"] == 0
        assert body["nuevas"]["new_found"] == 0
