# setup.py
from setuptools import setup, find_packages

setup(
    name="stackvm",
    version="0.1.0",
    description="A small stack-based bytecode virtual machine",
    packages=find_packages(include=["stackvm", "stackvm.*"]),
    python_requires=">=3.8",
    extras_require={
        "test": ["pytest"],
    },
    zip_safe=False,
)
