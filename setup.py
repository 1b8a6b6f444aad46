
from setuptools import setup, find_packages

setup(
    name                 = 'massrank',
    version              = '0.1.0',
    description          = 'pagerank with mass-conserving dangling vertex redistribution',
    license              = 'GPLv3',
    packages             = find_packages(exclude = ['tests', 'tests.*']),
    python_requires      = '>= 3.8',
    install_requires     = [
        'numpy',
        'scipy',
        'pandas',
        'networkx',
        'joblib',
        'rich'
    ],
    extras_require       = {
        'test': [
            'pytest'
        ]
    },
    include_package_data = False,
    zip_safe             = False
)
