# --------------------------------------------------------------
# File: cli.py
# Description: Interfaz de línea de comandos para cifrar y descifrar sobres.
# --------------------------------------------------------------
"""Punto de entrada `sealbox`: resuelve la selección del operador y la pasa al pipeline."""

from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
from typing import Optional, Sequence

import colorlog

from sealbox import config
from sealbox.errors import FileIOError, SealboxError, UsageError
from sealbox.keystore import ConfirmFn, KeyStore
from sealbox.models import Direction, PipelineConfig, TextEncoding
from sealbox.pipeline import EnvelopePipeline
from sealbox.storage import atomic_write_bytes, read_bytes

logger = logging.getLogger(__name__)

ENCRYPTED_SUFFIX = ".bin"
DECRYPTED_SUFFIX = ".dec"
STRING_INPUT_NAME = "input"
_YES_ANSWERS = {"s", "si", "sí", "y", "yes"}


def eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


def setup_logging(verbose: bool = False) -> None:
    """Configura un manejador coloreado en stderr para el logger `sealbox`."""

    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.WARNING)
    formatter = colorlog.ColoredFormatter(
        "%(asctime)s - %(log_color)s%(levelname)s%(reset)s - %(name)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    handler = colorlog.StreamHandler()
    handler.setFormatter(formatter)

    package_logger = logging.getLogger("sealbox")
    package_logger.setLevel(level)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)


def signal_handler(signum, frame):
    """Termina el proceso ante SIGINT/SIGTERM."""
    eprint("\nInterrumpido.")
    sys.exit(130)


def setup_signal_handlers():
    signal.signal(signal.SIGINT, signal_handler)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, signal_handler)


def prompt_reuse_key(prompt: str) -> bool:
    """Pregunta al operador por stderr si reutiliza la clave existente.

    Raises:
        UsageError: Si stdin se cierra sin respuesta, para no regenerar la
        clave en ejecuciones no interactivas.

    """

    sys.stderr.write(prompt)
    sys.stderr.flush()
    answer = sys.stdin.readline()
    if not answer:
        raise UsageError("Sin respuesta sobre la clave existente; usa --yes o --new-key.")
    return answer.strip().lower() in _YES_ANSWERS


def default_output_path(direction: Direction, input_name: str) -> str:
    """Deriva el nombre de salida: `<entrada>.bin` al cifrar y `.dec` al descifrar."""

    if direction is Direction.ENCODE:
        return input_name + ENCRYPTED_SUFFIX
    if input_name.endswith(ENCRYPTED_SUFFIX):
        input_name = input_name[: -len(ENCRYPTED_SUFFIX)]
    return input_name + DECRYPTED_SUFFIX


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sealbox",
        description="Comprime y cifra (AES-256-GCM) un fichero o texto con una clave local persistente.",
    )

    direction = p.add_mutually_exclusive_group(required=True)
    direction.add_argument("-e", "--encrypt", action="store_true", help="Cifrar.")
    direction.add_argument("-d", "--decrypt", action="store_true", help="Descifrar.")

    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("-f", "--file", help="Ruta del fichero de entrada.")
    source.add_argument("-s", "--string", help="Texto de entrada literal.")

    p.add_argument(
        "--output-as-hex",
        action="store_true",
        help="Usar hexadecimal en lugar de Base64 URL-safe en el canal de texto.",
    )
    p.add_argument(
        "--to-stdout",
        action="store_true",
        help="Escribir el resultado en stdout en lugar de en un fichero.",
    )
    p.add_argument(
        "--text",
        action="store_true",
        help="Cifrar: guardar el sobre como texto. Descifrar: el fichero contiene un sobre en texto.",
    )
    p.add_argument("-o", "--out", default=None, help="Ruta de salida (por defecto se deriva de la entrada).")
    p.add_argument("--overwrite", action="store_true", help="Permitir sobrescribir la salida existente.")

    p.add_argument("--key-file", default=config.KEY_FILE, help="Fichero de clave de 32 bytes.")
    key_choice = p.add_mutually_exclusive_group()
    key_choice.add_argument("-y", "--yes", action="store_true", help="Reutilizar la clave existente sin preguntar.")
    key_choice.add_argument(
        "--new-key",
        action="store_true",
        help="Regenerar la clave sin preguntar (PELIGROSO: invalida los sobres anteriores).",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Registro en nivel DEBUG.")
    return p


def _confirm_from_args(args: argparse.Namespace) -> ConfirmFn:
    if args.yes:
        return lambda _prompt: True
    if args.new_key:
        return lambda _prompt: False
    return prompt_reuse_key


def _resolve_output(args: argparse.Namespace, direction: Direction, input_name: str) -> Optional[str]:
    if args.to_stdout:
        return None
    out = args.out or default_output_path(direction, input_name)
    if os.path.realpath(out) == os.path.realpath(args.key_file):
        raise UsageError(f"La salida {out} coincide con el fichero de clave.")
    if os.path.exists(out) and not args.overwrite:
        raise UsageError(f"La salida {out} ya existe; usa --overwrite o --out.")
    return out


def _execute(args: argparse.Namespace) -> int:
    direction = Direction.ENCODE if args.encrypt else Direction.DECODE
    scheme = TextEncoding.HEX if args.output_as_hex else TextEncoding.BASE64

    if args.file is not None:
        input_name = args.file
        try:
            input_bytes = read_bytes(args.file)
        except OSError as exc:
            raise FileIOError(f"No se pudo leer la entrada {args.file}.") from exc
    else:
        input_name = STRING_INPUT_NAME
        input_bytes = os.fsencode(args.string)

    if direction is Direction.ENCODE:
        use_text = args.to_stdout or args.text
    else:
        use_text = args.string is not None or args.text

    out_path = _resolve_output(args, direction, input_name)
    run_config = PipelineConfig(
        direction=direction,
        input_bytes=input_bytes,
        use_text_encoding=use_text,
        encoding_scheme=scheme,
    )
    keystore = KeyStore(args.key_file, confirm=_confirm_from_args(args))
    result = EnvelopePipeline(keystore).run(run_config)

    output = result.output_bytes
    if result.is_text:
        output += b"\n"

    if out_path is None:
        sys.stdout.flush()
        sys.stdout.buffer.write(output)
        sys.stdout.flush()
        return 0

    try:
        atomic_write_bytes(out_path, output, mode=0o600)
    except OSError as exc:
        raise FileIOError(f"No se pudo escribir la salida {out_path}.") from exc
    if direction is Direction.ENCODE:
        print(f"Fichero cifrado guardado en: {out_path}")
    else:
        print(f"Fichero descifrado guardado en: {out_path}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Ejecuta la CLI y devuelve el código de salida."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        return _execute(args)
    except UsageError as exc:
        eprint(f"Error de {exc.category}: {exc}")
        return 2
    except SealboxError as exc:
        eprint(f"Error de {exc.category}: {exc}")
        return 1


def run() -> None:
    setup_signal_handlers()
    raise SystemExit(main())
