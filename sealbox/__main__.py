from sealbox.cli import run

run()
