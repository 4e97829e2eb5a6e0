from setuptools import setup
import io


with io.open('README.md', encoding='utf-8') as f:
    long_description = f.read()

with io.open('requirements.txt', encoding='utf-8') as f:
    requirements = [r for r in f.read().split('\n') if len(r)]


setup(name='pyln-regtest',
      version='0.1.0',
      description='Drive CLN and LND nodes from tests through one client interface',
      long_description=long_description,
      long_description_content_type='text/markdown',
      url='http://github.com/ElementsProject/lightning',
      license='MIT',
      packages=['pyln.regtest'],
      python_requires='>=3.10',
      install_requires=requirements,
      extras_require={
          'test': [
              'pytest>=7.0',
              'pytest-asyncio>=0.21',
          ],
      },
      zip_safe=True)
