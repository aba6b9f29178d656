import pathlib

import setuptools

here = pathlib.Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

setuptools.setup(
    name="onemoney",
    version="0.1.0",
    description="Build, encode and sign OneMoney transactions",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    package_data={"onemoney": ["logger.cfg", "py.typed"]},
    python_requires=">=3.10",
    install_requires=[
        "ethereum-types>=0.2.1",
        "pycryptodome>=3.20,<4",
        "coincurve>=20",
        "pydantic>=2.0,<3",
        "PyYAML>=6.0,<7",
        "ethereum-rlp>=0.1.3",
    ],
    extras_require={
        "test": [
            "pytest>=8",
            "pytest-asyncio>=0.23",
        ],
    },
)
