from setuptools import setup


setup(name='bip321',
      version='0.1.0',
      description='Parser and encoder for BIP321 bitcoin: payment URIs',
      url='https://github.com/bitcoin/bips/blob/master/bip-0321.mediawiki',
      author='',
      author_email='',
      license='GPL',
      packages=['bip321'],
      install_requires=['python-bitcointx==1.1.3', 'bech32==1.2.0',
                        'bolt11>=2.0.5', 'bitstring<5',
                        'chromalog==1.0.5',
                        'colorama>=0.4.4'],
      extras_require={'test': ['pytest>=6.2.5']},
      python_requires='>=3.10',
      zip_safe=False)
