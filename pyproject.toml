[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "umachine"
version = "0.1.0"
description = "A Universal Machine emulator with a program loader, instruction decoder and unit-test program generator"
requires-python = ">=3.10"
dependencies = []
keywords = ["emulator", "virtual-machine", "universal-machine", "bitpack", "interpreter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
um = "umachine.cli:main"
um-testgen = "umachine.testgen:main"

[tool.hatch.build.targets.wheel]
packages = ["umachine"]

[tool.pytest.ini_options]
addopts = "-ra"
