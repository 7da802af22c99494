from setuptools import setup, find_packages

with open("README.rst", "r") as fh:
    long_description = fh.read()

with open('requirements.txt') as f:
    requirements = f.read().splitlines()


setup(
    name='scanpoints',
    version='1.0.0',
    license='MIT',
    description='Scan path point generators',
    long_description=long_description,
    long_description_content_type="text/x-rst",
    keywords='beamline data-acquisition scanning raster',
    packages=find_packages(include=['scanpoints', 'scanpoints.*']),
    install_requires=requirements,
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.10',
    classifiers=[
        'Intended Audience :: Developers',
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
