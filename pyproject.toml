[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "taxisim"
version = "1.0.0"
description = "A grid-city ride-hailing simulation with user accounts, fares and trip routing"
requires-python = ">=3.10"
dependencies = []
keywords = ["taxi", "simulation", "ride-hailing", "grid", "fare"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
taxisim = "taxisim.app:main"

[tool.hatch.build.targets.wheel]
packages = ["taxisim"]

[tool.pytest.ini_options]
addopts = "-ra"
