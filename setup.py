from setuptools import setup, find_packages

setup(
    name="ritstore",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=["pyyaml"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "rit=ritstore.client:main",
        ],
    },
)
