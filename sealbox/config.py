# --------------------------------------------------------------
# File: config.py
# Description: Parámetros de entorno para el almacén de claves y el registro.
# --------------------------------------------------------------
import os

from dotenv import load_dotenv

load_dotenv()

KEY_FILE = os.getenv("SEALBOX_KEY_FILE", "key.bin")
LOG_LEVEL = os.getenv("SEALBOX_LOG_LEVEL", "WARNING").upper()
