[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "packcalc"
version = "1.0.0"
description = "HTTP service that works out the least wasteful, fewest packs needed to fulfil an order"
requires-python = ">=3.10"
keywords = ["packing", "order fulfilment", "wsgi", "api", "optimisation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Office/Business",
]
dependencies = [
    "werkzeug>=3.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[project.scripts]
packcalc = "packcalc.app:main"

[tool.hatch.build.targets.wheel]
packages = ["packcalc"]

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
