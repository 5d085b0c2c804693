from setuptools import find_packages, setup

setup(
    name="vingd",
    version="1.7.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2",
        "cryptography",
        "requests",
        "click",
    ],
    extras_require={
        "test": [
            "pytest",
            "fastapi",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "vingd=vingd.cli:cli",
        ],
    },
)
