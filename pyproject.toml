[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "compilerkit"
version = "0.1.0"
description = "Building blocks for a small compiler: regex to automata, DFA minimization, expression parsing, semantic checks and source translation"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "compiler",
    "automaton",
    "nfa",
    "dfa",
    "regex",
    "parser",
    "semantic-analysis",
    "code-generation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["compilerkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
