import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="starknet_jsonrpc_codegen",
    version="0.1.0",
    description="Generate typed Python definitions and wire codecs from the Starknet JSON-RPC specification",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Intended Audience :: Developers",
    ],
    keywords="starknet json-rpc openrpc code generation python dataclass template",
    license="MIT",
    packages=find_packages(),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.2.0",
        "dataclasses-json>=0.6.0",
        "jinja2>=3.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "starknet_jsonrpc_codegen=starknet_jsonrpc_codegen.starknet_jsonrpc_codegen:starknet_jsonrpc_codegen",
        ],
    },
    include_package_data=True,
    package_data={
        "starknet_jsonrpc_codegen": [
            "templates/**/*.jinja2",
            "specs/**/*",
            "tests/test_data/**/*",
        ],
    },
    zip_safe=False,
)
