[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "graxil"
version = "1.0.1"
description = "Mining statistics, GPU monitoring, dashboards and nonce helpers for SHA3x GPU miners"
requires-python = ">=3.10"
dependencies = [
    "psutil",
]
keywords = ["sha3x", "mining", "gpu", "hashrate", "monitoring", "nvidia-smi", "statistics", "nonce"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["graxil"]

[tool.hatch.build.targets.sdist]
include = ["graxil", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
