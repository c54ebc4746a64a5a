# --------------------------------------------------------------
# File: errors.py
# Description: Taxonomía de errores del pipeline de sobres cifrados.
# --------------------------------------------------------------
"""Excepciones que distinguen cada categoría de fallo ante el operador.

Los mensajes están pensados para mostrarse tal cual: nunca incluyen material
de clave ni texto en claro.
"""


class SealboxError(Exception):
    """Error base de sealbox con un mensaje apto para el operador."""

    category = "error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message())

    @classmethod
    def default_message(cls) -> str:
        return "Error no especificado."


class KeyIOError(SealboxError):
    """No se pudo leer o escribir el fichero de clave."""

    category = "clave"

    @classmethod
    def default_message(cls) -> str:
        return "No se pudo acceder al almacenamiento de la clave."


class RandomSourceError(SealboxError):
    """La fuente de aleatoriedad segura del sistema no está disponible."""

    category = "aleatoriedad"

    @classmethod
    def default_message(cls) -> str:
        return "La fuente de aleatoriedad segura no está disponible."


class EnvelopeFormatError(SealboxError):
    """El sobre es demasiado corto o no respeta el formato esperado."""

    category = "formato"

    @classmethod
    def default_message(cls) -> str:
        return "Sobre malformado o truncado."


class DecodeError(SealboxError):
    """La capa de texto (hex o base64) no pudo decodificarse."""

    category = "codificación"

    @classmethod
    def default_message(cls) -> str:
        return "Codificación de entrada malformada."


class AuthenticationError(SealboxError):
    """La etiqueta AES-GCM no verifica: clave incorrecta o datos alterados."""

    category = "autenticación"

    @classmethod
    def default_message(cls) -> str:
        return "Clave incorrecta o datos corruptos."


class DecompressionError(SealboxError):
    """El flujo deflate autenticado no pudo descomprimirse."""

    category = "descompresión"

    @classmethod
    def default_message(cls) -> str:
        return "Carga comprimida corrupta."


class UsageError(SealboxError):
    """Selección inválida del operador (dirección, entrada o salida)."""

    category = "uso"

    @classmethod
    def default_message(cls) -> str:
        return "Uso incorrecto."


class FileIOError(SealboxError):
    """No se pudo leer la entrada o escribir la salida del operador."""

    category = "fichero"

    @classmethod
    def default_message(cls) -> str:
        return "Error de lectura o escritura de fichero."
