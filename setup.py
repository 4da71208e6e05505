from setuptools import setup, find_packages

setup(
    name='markerpoint',
    version='0.1.0',
    packages=find_packages(include=['markerpoint', 'markerpoint.*']),
    install_requires=[
        'numpy',
        'nibabel',
        'PyQt5',
    ],
    extras_require={
        'test': ['pytest'],
    },
    description='Marker-point annotation volumes and slice navigation for 3D images',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    python_requires=">=3.9"
)
