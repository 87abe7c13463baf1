[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bunster"
version = "0.1.0"
description = "Token model, shell runtime, builtins and test tooling for compiling shell scripts"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "bash", "compiler", "runtime", "dotenv", "diff"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bunster"]

[tool.pytest.ini_options]
addopts = "-ra"
