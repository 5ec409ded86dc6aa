# setup.py
from setuptools import setup, find_packages

setup(
    name="hostrepl",
    version="0.1.0",
    description="Tick-driven TCP REPL for live code execution inside a running Python process",
    packages=find_packages(include=["hostrepl", "hostrepl.*"]),
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
