"""
Setup script for Route Overlay
Run: pip install -e .[test]
"""

from setuptools import find_packages, setup

setup(
    name='route-overlay',
    version='1.0.0',
    description='GPS route cleaning and distance-aligned route comparison',
    package_dir={'': 'src'},
    packages=find_packages('src'),
    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'pandas',
        'fitparse',
        'gpxpy',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': ['route-overlay=route_overlay.cli:main'],
    },
)
