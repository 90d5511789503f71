# contador/utils/templates.py
"""
Entorno Jinja2 compartido para correos y reportes HTML.
"""
import logging
from pathlib import Path
from jinja2 import Environment, FileSystemLoader, select_autoescape

logger = logging.getLogger(__name__)

# contador/templates/{emails,reportes}/
TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

_jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(['html', 'xml']),
    trim_blocks=True,
    lstrip_blocks=True
)


def _fecha(value, fmt: str = "%d/%m/%Y") -> str:
    if not value:
        return ""
    return value.strftime(fmt)


def _moneda(value, decimales: int = 2) -> str:
    """1234.5 -> '1,234.50'"""
    try:
        return f"{float(value or 0):,.{decimales}f}"
    except (TypeError, ValueError):
        return str(value)


_jinja_env.filters["fecha"] = _fecha
_jinja_env.filters["moneda"] = _moneda


def load_template(template_name: str):
    """
    Args:
        template_name: Ruta relativa a contador/templates (ej: 'emails/smtp_test.html')
    """
    try:
        return _jinja_env.get_template(template_name)
    except Exception as e:
        logger.error(f"Error cargando plantilla {template_name}: {str(e)}")
        raise


def render_template(template_name: str, **kwargs) -> str:
    template = load_template(template_name)
    try:
        return template.render(**kwargs)
    except Exception as e:
        logger.error(f"Error renderizando plantilla {template_name}: {str(e)}")
        raise
