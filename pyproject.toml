[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fnkrt"
version = "0.1.0"
description = "Runtime pieces of a small hobby kernel: bootloader, socket library, heap allocator and an ELF-to-.fnk header tool"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "kernel",
    "bootloader",
    "circular-buffer",
    "allocator",
    "elf",
    "fnk",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
fnkrt-boot = "fnkrt.boot:main"
elftofnk = "fnkrt.elftofnk:main"

[tool.hatch.build.targets.wheel]
packages = ["fnkrt"]

[tool.pytest.ini_options]
addopts = "-ra"
