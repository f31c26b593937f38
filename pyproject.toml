[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "isetta"
version = "0.5.1"
description = "Sets up WSL2 networking for direct internet access or access through a Px proxy running on Windows"
requires-python = ">=3.11"
dependencies = [
    "requests",
]
keywords = ["wsl", "wsl2", "proxy", "px", "networking", "dns", "windows"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
isetta = "isetta.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["isetta"]

[tool.hatch.build.targets.sdist]
include = ["isetta", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
