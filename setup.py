from setuptools import setup, find_packages

setup(
    name="visio_stencil",
    version="0.1.0",
    description="Build Visio stencils from folders of SVG/PNG images with uniform size, connection points and labels",
    author="",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "vsdx>=0.5.0",
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
        "python-dotenv>=1.0.0",
        "pywin32>=306; sys_platform == 'win32'",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "visio-stencil=visio_stencil.main:main",
        ],
    },
    python_requires=">=3.8",
)
