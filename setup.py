from setuptools import find_packages, setup

setup(
    name="dgp-annotations",
    version="0.1.0",
    packages=find_packages(exclude=["test_dgp_annotations", "test_dgp_annotations.*"]),
    python_requires=">=3.8",
    long_description="Serialization schema, codec and validation for DGP perception annotations",
    install_requires=[
        "coloredlogs>=15.0.1,<16.0.0",
        "dataclasses_json>=0.5.3,<1.0.0",
        "mashumaro>=3.0",
        "more-itertools>=8.11.0",
        "numpy>=1.19",
        "protobuf>=4.22.0",
        "pyquaternion>=0.9.9,<1.0.0",
        "ujson>=5.1.0,<6.0.0",
    ],
    include_package_data=True,
    extras_require={
        "test": [
            "pytest>=7.2.2",
            "pytest-cov>=2.12.1",
        ],
        "dev": [
            "black==22.6.0",
            "mypy>=1.3.0",
            "pre-commit>=2.13.0,<3.0.0",
            "pytest-cov>=2.12.1,<3.0.0",
            "pytest>=7.2.2",
            "ruff>=0.0.280",
            "types-ujson",
        ],
    },
    zip_safe=False,
)
