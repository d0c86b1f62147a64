from setuptools import find_packages, setup

LIBRARY_NAME = "rlinsolve"


setup(
    name=LIBRARY_NAME,
    version="0.1.0",
    description="Randomized iterative solvers for linear systems in PyTorch",
    packages=find_packages(include=[LIBRARY_NAME, f"{LIBRARY_NAME}.*"]),
    python_requires=">=3.10",
    install_requires=[
        "torch>=2.0",
        "numpy",
        "wandb",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
