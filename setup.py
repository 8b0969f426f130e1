from setuptools import setup, find_packages

setup(
    name="BasisGraph",
    version="0.1.0",
    author="Lukas Penner",
    description="Live pseudo-3D basis function synthesis plot",
    packages=find_packages(include=["BasisGraph", "BasisGraph.*"]),
    install_requires=[
        # Pin 1.24.4 for Python < 3.12
        "numpy==1.24.4; python_version<'3.12'",
        # Allow newer NumPy for Python >= 3.12
        "numpy>=1.26.0; python_version>='3.12'",
        "pyqtgraph>=0.13.3",
        "PyQt5>=5.15.10",
        "PyQt5-sip>=12.15.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.9",
)
