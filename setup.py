from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="refdash",
    version="0.1.0",
    description="Run the code examples of The Rust Reference and summarize results.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests",)),
    python_requires=">=3.10",
    install_requires=["markdown-it-py", "PyYAML"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["refdash=refdash.cli:main"]},
)
