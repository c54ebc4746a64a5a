# --------------------------------------------------------------
# File: __init__.py
# Description: Exposición pública del pipeline de sobres cifrados.
# --------------------------------------------------------------
"""Inicializa el paquete `sealbox` y documenta sus módulos principales."""

__all__ = [
    "cli",
    "compression",
    "config",
    "crypto_sym",
    "errors",
    "keystore",
    "models",
    "pipeline",
    "storage",
    "text_encoding",
]
