[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bridgegen"
version = "0.1.0"
description = "Parse include_cpp! directive blocks, lay out generated binding files, and reduce failing test cases with creduce"
requires-python = ">=3.10"
dependencies = []
keywords = ["bindings", "code-generation", "c++", "interop", "creduce"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: POSIX",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bridgegen-reduce = "bridgegen.reduce:main"

[tool.hatch.build.targets.wheel]
packages = ["bridgegen"]

[tool.pytest.ini_options]
addopts = "-ra"
