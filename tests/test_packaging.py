"""Tests para la configuracion de empaquetado."""

from __future__ import annotations

import tomllib
import unittest
from pathlib import Path

PYPROJECT_PATH = Path(__file__).resolve().parents[1] / "pyproject.toml"


class PackagingTests(unittest.TestCase):
    """Valida que solo se instalen los paquetes de la aplicacion."""

    def setUp(self) -> None:
        with PYPROJECT_PATH.open("rb") as toml_file:
            self.config = tomllib.load(toml_file)

    def test_scripts_folder_is_not_installed(self) -> None:
        """La carpeta scripts/ se ejecuta desde el repositorio y no se instala."""
        include = self.config["tool"]["setuptools"]["packages"]["find"]["include"]

        self.assertEqual(sorted(include), ["cliente*", "servidor*", "shared*"])
        for target in self.config["project"]["scripts"].values():
            self.assertFalse(target.startswith("scripts."))


if __name__ == "__main__":
    unittest.main()
