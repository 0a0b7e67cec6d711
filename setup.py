# Standard imports
import os
from setuptools import setup, find_packages


# Begin setup
setup_keywords = dict()
setup_keywords['name'] = 'stokes-disc'
setup_keywords['description'] = 'Python package for polarized X-ray reflection from distant accretion discs'
setup_keywords['author'] = 'stokes-disc developers'
setup_keywords['license'] = 'BSD'
setup_keywords['version'] = '0.1.0'
# Use README.md as long_description.
setup_keywords['long_description'] = ''
if os.path.exists('README.md'):
    with open('README.md') as readme:
        setup_keywords['long_description'] = readme.read()
setup_keywords['python_requires'] = '>=3.11'
setup_keywords['install_requires'] = [
    'numpy>=1.21',
    'xarray',
]
setup_keywords['extras_require'] = {
    'dev': ['pytest'],
}
setup_keywords['zip_safe'] = False
setup_keywords['packages'] = find_packages()

setup(**setup_keywords)
