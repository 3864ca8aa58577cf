[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "pingo"
version = "0.1.0"
description = "The execution core of a small interactive shell: builtins, environment, redirections and pipelines"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "builtins", "pipeline", "redirection", "environment"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["pingo*"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
