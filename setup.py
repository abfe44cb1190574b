"""
Setup script for gapforge.

gapforge turns JavaScript snippets into fill-in-the-blank exercises:
it parses the code, picks syntactically meaningful spans to hide, and
checks the learner's answers.

The 'gapforge' command is the primary entry point.
"""

from setuptools import find_packages, setup

setup(
    name="gapforge",
    version="1.0.0",
    description="Fill-in-the-blank code exercises generated from JavaScript snippets",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="gapforge contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        # Parsing
        "tree-sitter>=0.23.0",
        "tree-sitter-language-pack>=0.7.0,<1.0",
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "gapforge=gapforge.cli:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning cli education cloze javascript exercises",
)
