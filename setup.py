"""
setup.py - Package Installation Configuration
==============================================
"""

from setuptools import setup
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
if readme_file.exists():
    long_description = readme_file.read_text()
else:
    long_description = "Tile Layout Planning System"

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
if requirements_file.exists():
    with open(requirements_file) as f:
        requirements = [line.strip() for line in f
                       if line.strip() and not line.startswith('#')]
else:
    requirements = [
        'numpy>=1.21.0',
        'shapely>=2.0.0',
        'PyYAML>=5.4',
    ]

setup(
    name='tile-layout-planner',
    version='1.0.0',
    author='Tile Layout Planning Team',
    description='Tile placement, cut optimization and skirting planning for rooms',
    long_description=long_description,
    long_description_content_type='text/markdown',
    py_modules=[
        'area_resolver',
        'config',
        'cut_classifier',
        'cut_pair_matcher',
        'floor_geometry',
        'main',
        'offcut_pool',
        'pattern_generator',
        'skirting_segmenter',
        'tile_metrics',
        'tile_models',
        'utils',
    ],
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Scientific/Engineering',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
    install_requires=requirements,
    extras_require={
        'dev': [
            'pytest>=6.2.0',
        ],
        'test': [
            'pytest>=6.2.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'tile-plan=main:main',
        ],
    },
    zip_safe=False,
)
