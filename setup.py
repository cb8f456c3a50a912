import re

from setuptools import find_packages, setup


NAME = "wgpu_clouds"
SUMMARY = "Procedural volumetric clouds and sky, rendered with wgpu or numpy"

with open(f"{NAME}/__init__.py") as fh:
    VERSION = re.search(r"__version__ = \"(.*?)\"", fh.read()).group(1)


setup(
    name=NAME,
    version=VERSION,
    packages=find_packages(
        exclude=["tests", "tests.*", "examples", "examples.*"]
    ),
    python_requires=">=3.9.0",
    install_requires=["wgpu", "rendercanvas", "numpy", "Pillow"],
    extras_require={"tests": ["pytest"]},
    entry_points={"console_scripts": ["wgpu-clouds = wgpu_clouds.cli:main_cli"]},
    license="BSD 2-Clause",
    description=SUMMARY,
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
