from setuptools import find_packages, setup

setup(
    name="sonar_probmap",
    version="0.1.0",
    description="Ship-placement probability heatmaps for grid ship-hunting games",
    packages=find_packages(include=["sonar_probmap", "sonar_probmap.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "PyYAML>=5.4",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
)
