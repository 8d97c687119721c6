"""
Setup script for the Quaternionic Memory Field package.

Installation:
    pip install -e .        # Development mode
    pip install -e .[dev]   # With test tooling
    pip install .           # Standard install
"""

from setuptools import setup, find_packages

# Read long description from README
with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

# Read requirements
with open("requirements.txt", "r", encoding="utf-8") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="quaternionic-memory-field",
    version="0.1.0",
    description="Prime-harmonic semantic memory field: text encoded as unit quaternions and prime signatures, recalled by resonance and clustered by entanglement",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where="src") + ["api"],
    package_dir={"": "src", "api": "api"},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Text Processing :: Indexing",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.3.0",
            "httpx>=0.24.0",
            "black>=23.3.0",
            "flake8>=6.0.0",
            "mypy>=1.3.0",
        ],
        "api": [
            "uvicorn[standard]>=0.24.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "qmf-bench=qmf.benchmark:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
