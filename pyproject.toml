[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oapigen"
version = "0.1.0"
description = "Helpers for generating Go types and client response handling from OpenAPI 3 specifications"
requires-python = ">=3.10"
dependencies = []
keywords = ["openapi", "swagger", "code generation", "go", "schema"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Typing :: Typed",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest", "pyyaml"]

[tool.hatch.build.targets.wheel]
packages = ["oapigen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
