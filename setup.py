import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="structure",
    version="0.1.0",
    author="Gianluca Pacchiella",
    author_email="gp@ktln2.org",
    description="Format strings for binary layouts",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        'bitstring<5',
    ],
    extras_require={
        'test': [
            'pytest',
            'hypothesis',
        ],
    },
    scripts=['scripts/structdump.py'],
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GPLv2 License",
        "Operating System :: OS Independent",
    ],
)
