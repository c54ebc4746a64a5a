# --------------------------------------------------------------
# File: test_keystore.py
# Description: Pruebas del ciclo de vida de la clave persistida.
# --------------------------------------------------------------

import logging
import os
import threading

import pytest

from sealbox import keystore as keystore_module
from sealbox.errors import KeyIOError, RandomSourceError
from sealbox.keystore import REUSE_PROMPT, KeyStore


def _never_asked(prompt):
    """Falla si el KeyStore consulta al operador cuando no debe.

    Args:
        prompt (str): Pregunta que se habría mostrado.

    Returns:
        bool: Nunca retorna; lanza AssertionError.
    """
    raise AssertionError("no debería preguntarse al operador")


def test_obtain_generates_when_missing(tmp_path):
    """Comprueba que sin fichero se genere y persista una clave de 32 bytes.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Las aserciones comparan la clave devuelta con la persistida.
    """
    path = tmp_path / "key.bin"
    store = KeyStore(str(path), confirm=_never_asked)

    key = store.obtain()

    assert path.read_bytes() == key.material
    assert len(key.material) == 32


def test_obtain_reuses_on_acceptance(tmp_path):
    """Verifica que aceptar la reutilización devuelva los bytes almacenados.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Las aserciones comprueban la clave cargada y la pregunta mostrada.
    """
    path = tmp_path / "key.bin"
    path.write_bytes(b"\x11" * 32)
    prompts = []

    def _accept(prompt):
        prompts.append(prompt)
        return True

    key = KeyStore(str(path), confirm=_accept).obtain()

    assert key.material == b"\x11" * 32
    assert prompts == [REUSE_PROMPT]


def test_obtain_regenerates_on_refusal(tmp_path, caplog):
    """Garantiza que rechazar la clave la regenere y avise del sobrescrito.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.
        caplog (pytest.LogCaptureFixture): Captura de registros de logging.

    Returns:
        None: Las aserciones revisan la clave nueva y el aviso registrado.
    """
    path = tmp_path / "key.bin"
    path.write_bytes(b"\x11" * 32)

    with caplog.at_level(logging.WARNING, logger="sealbox.keystore"):
        key = KeyStore(str(path), confirm=lambda _p: False).obtain()

    assert key.material != b"\x11" * 32
    assert path.read_bytes() == key.material
    assert any("sobrescribe" in record.getMessage() for record in caplog.records)


def test_default_confirm_reuses(tmp_path):
    """Sin capacidad inyectada, la clave existente se reutiliza.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Las aserciones comparan la clave cargada con la almacenada.
    """
    path = tmp_path / "key.bin"
    path.write_bytes(b"\x22" * 32)
    assert KeyStore(str(path)).obtain().material == b"\x22" * 32


@pytest.mark.parametrize("content", [b"", b"\x00" * 16, b"\x00" * 33])
def test_load_rejects_wrong_size(tmp_path, content):
    """Valida que un fichero de clave de tamaño incorrecto produzca KeyIOError.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.
        content (bytes): Contenido inválido proporcionado por el parámetro parametrizado.

    Returns:
        None: Se espera la excepción de la taxonomía.
    """
    path = tmp_path / "key.bin"
    path.write_bytes(content)
    with pytest.raises(KeyIOError):
        KeyStore(str(path)).obtain()


def test_load_unreadable_raises(tmp_path):
    """Comprueba que un fallo de lectura se clasifique como KeyIOError.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Se espera la excepción de la taxonomía.
    """
    path = tmp_path / "key.bin"
    path.mkdir()
    with pytest.raises(KeyIOError):
        KeyStore(str(path)).load()


def test_generate_unwritable_raises(tmp_path):
    """Comprueba que un fallo de escritura se clasifique como KeyIOError.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Se espera la excepción de la taxonomía.
    """
    blocker = tmp_path / "not_a_dir"
    blocker.write_bytes(b"")
    with pytest.raises(KeyIOError):
        KeyStore(str(blocker / "key.bin")).obtain()


def test_random_failure_raises_and_keeps_old_key(tmp_path):
    """Asegura que sin aleatoriedad no se toque la clave existente.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Las aserciones comprueban la excepción y la clave intacta.
    """
    path = tmp_path / "key.bin"
    path.write_bytes(b"\x33" * 32)

    def _broken(_n):
        raise OSError("sin entropía")

    store = KeyStore(str(path), confirm=lambda _p: False, random_source=_broken)
    with pytest.raises(RandomSourceError):
        store.obtain()
    assert path.read_bytes() == b"\x33" * 32


def test_stores_share_lock_per_path(tmp_path):
    """Verifica que dos KeyStore sobre la misma ruta compartan el cerrojo.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.

    Returns:
        None: Las aserciones comparan la identidad de los cerrojos.
    """
    path = str(tmp_path / "key.bin")
    relative = os.path.relpath(path)
    assert KeyStore(path)._lock is KeyStore(relative)._lock
    assert KeyStore(path)._lock is not KeyStore(str(tmp_path / "other.bin"))._lock


def test_concurrent_obtain_generates_once(tmp_path, monkeypatch):
    """Comprueba que llamadas concurrentes no regeneren la clave dos veces.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.
        monkeypatch (pytest.MonkeyPatch): Fixture para contar las escrituras.

    Returns:
        None: Las aserciones verifican una única escritura y una única clave.
    """
    path = str(tmp_path / "key.bin")
    calls = []
    real_write = keystore_module.atomic_write_bytes

    def _counting_write(*args, **kwargs):
        calls.append(args[0])
        real_write(*args, **kwargs)

    monkeypatch.setattr(keystore_module, "atomic_write_bytes", _counting_write)
    results = []

    def _worker():
        results.append(KeyStore(path).obtain().material)

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert len(set(results)) == 1
