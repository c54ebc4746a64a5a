# --------------------------------------------------------------
# File: text_encoding.py
# Description: Representación de sobres binarios en canales de texto.
# --------------------------------------------------------------
"""Codificación hexadecimal y Base64 URL-safe sin relleno."""

from __future__ import annotations

import base64
import binascii
import re
from typing import Union

from sealbox.errors import DecodeError
from sealbox.models import TextEncoding

_B64U_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")
_HEX_ALPHABET = re.compile(r"[0-9A-Fa-f]*")


def _b64u(data: bytes) -> str:
    """Codifica datos binarios en Base64 URL-safe sin relleno."""

    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _unb64u(value: str) -> bytes:
    """Decodifica datos codificados en Base64 URL-safe gestionando el relleno."""

    if not _B64U_ALPHABET.fullmatch(value):
        raise DecodeError("Base64 malformado: caracteres no permitidos.")
    pad = "=" * (-len(value) % 4)
    try:
        return base64.urlsafe_b64decode(value + pad)
    except binascii.Error as exc:
        raise DecodeError("Base64 malformado: longitud inválida.") from exc


def _unhex(value: str) -> bytes:
    if not _HEX_ALPHABET.fullmatch(value):
        raise DecodeError("Hexadecimal malformado: caracteres no permitidos.")
    try:
        return binascii.unhexlify(value)
    except binascii.Error as exc:
        raise DecodeError("Hexadecimal malformado: longitud impar.") from exc


def encode_text(data: bytes, scheme: TextEncoding) -> str:
    """Convierte un sobre binario en texto.

    Args:
        data (bytes): Sobre binario.
        scheme (TextEncoding): Hexadecimal en minúsculas o Base64 URL-safe.

    Returns:
        str: Representación textual sin relleno ni saltos de línea.

    """

    if scheme is TextEncoding.HEX:
        return data.hex()
    return _b64u(data)


def decode_text(text: Union[str, bytes], scheme: TextEncoding) -> bytes:
    """Revierte `encode_text` ignorando espacios en blanco en los extremos.

    Args:
        text (Union[str, bytes]): Texto recibido del canal.
        scheme (TextEncoding): Esquema usado al codificar.

    Returns:
        bytes: Sobre binario.

    Raises:
        DecodeError: Si el texto no es ASCII o no respeta el esquema.

    """

    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("ascii")
        except UnicodeDecodeError as exc:
            raise DecodeError("La entrada de texto no es ASCII.") from exc
    value = text.strip()
    if scheme is TextEncoding.HEX:
        return _unhex(value)
    return _unb64u(value)
