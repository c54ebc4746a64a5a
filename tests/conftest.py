# --------------------------------------------------------------
# File: conftest.py
# Description: Fixtures compartidas para aislar el entorno, recargar la configuración y restaurar el registro.
# --------------------------------------------------------------

import importlib
import logging
import os
from typing import Iterator

import pytest

from sealbox.models import SymmetricKey


@pytest.fixture(autouse=True)
def _isolate_workdir(tmp_path, monkeypatch) -> Iterator[None]:
    """Aísla cwd y SEALBOX_*, recarga sealbox.config y restaura el logger `sealbox`.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.
        monkeypatch (pytest.MonkeyPatch): Fixture para ajustar cwd y variables de entorno.

    Returns:
        Iterator[None]: Control del fixture autouse durante la ejecución de cada test.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SEALBOX_KEY_FILE", str(tmp_path / "key.bin"))
    monkeypatch.delenv("SEALBOX_LOG_LEVEL", raising=False)

    import sealbox.cli as cli_module
    import sealbox.config as config_module

    importlib.reload(config_module)
    importlib.reload(cli_module)

    yield

    package_logger = logging.getLogger("sealbox")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def key() -> SymmetricKey:
    """Genera una clave aleatoria de 256 bits para las pruebas del pipeline.

    Returns:
        SymmetricKey: Clave simétrica válida de 32 bytes.
    """
    return SymmetricKey(material=os.urandom(32))
