from setuptools import setup, find_packages
import os

install_requires = ["pydantic>=2.0"]

# Define optional dependencies for development and specific features
extras_require = {
    "dev": ["pytest", "pygls>=1.0.0,<2", "lsprotocol"],
    "lsp": ["pygls>=1.0.0,<2", "lsprotocol"],  # Language Server Protocol support
}

setup(
    name="shapescript-compiler",
    version="0.1.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "ssc = ssc.cli:main",
            "ssc-lsp = ssc.server:start_server",
        ],
    },
    include_package_data=True,
    package_data={"ssc.evaluator": ["stdlib.shape"]},
    description="A compiler for the ShapeScript shape-description language, producing SVG documents.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
