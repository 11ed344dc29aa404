from .health import health_bp
from .pdf_proxy import pdf_proxy_bp

__all__ = ['health_bp', 'pdf_proxy_bp']
