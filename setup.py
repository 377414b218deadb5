# -*- coding: utf-8 -*-

from setuptools import setup, find_packages

setup(
    name='metapick',
    version='0.1.0',
    packages=find_packages(include=['metapick', 'metapick.*']),
    url='',
    author='crash',
    author_email='',
    description='Consensus meta-capper - derives meta-picks from agreement among profitable cappers',
    python_requires='>=3.10',
    install_requires=['regex',
                      'pyyaml',
                      'peewee'],
    extras_require={
        'test': ['pytest']
    },
    entry_points={
        'console_scripts': [
            'metapick = metapick.engine:main',
            'capper   = metapick.capper:main',
            'team     = metapick.team:main',
            'game     = metapick.game:main',
            'db_admin = metapick.db_admin:main'
        ],
    }
)
