from setuptools import setup, find_packages

setup(
    name="editstruct",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml",
        # Go syntax tree with exact byte offsets
        "tree-sitter>=0.22",
        "tree-sitter-go",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "editstruct=editstruct.cli:run",
        ],
    },
    description="Rewrite Go struct field types in place, preserving formatting.",
)
