"""Setup script for ASCIIMath to MathML"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="asciimath-mathml",
    version="0.1.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="Convert ASCIIMath notation to presentation MathML",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/asciimath-mathml",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Text Processing :: Markup :: XML",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    python_requires=">=3.8",
    install_requires=[
        "lxml>=4.6.0",
        "pyyaml>=5.4.0",
        "regex>=2021.8.0",
    ],
    extras_require={
        "dev": ["pytest>=6.0.0", "pytest-cov>=2.10.0", "black>=21.0", "flake8>=3.9.0"],
    },
)
