from setuptools import setup, find_packages

setup(
    name='OceanCacheSearch',
    version='1.0.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.8',
    install_requires=[
        'pandas',
        'numpy',
        'shapely',
        'requests',
        'python-dotenv'
    ],
    extras_require={
        'test': ['pytest']
    },
    entry_points={
        'console_scripts': [
            'ocs_search=ocs_engine.cli:main'
        ]
    }
)
