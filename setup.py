from setuptools import setup

setup(name='receipt_wrangler',
      version='0.1',
      description='Summarize warehouse club purchase history exports',
      license='GPLv3',
      packages=['receipt_wrangler', 'receipt_wrangler.report'],
      package_data={'receipt_wrangler.report': ['html/*.html']},
      python_requires='>=3.7',
      install_requires=[
          'click',
          'tabulate',
          'jinja2',
          'atomicwrites',
      ],
      extras_require={
          'test': ['pytest'],
      },
      entry_points={
          'console_scripts': [
              'receipt-wrangler = receipt_wrangler.receipt_wrangler:cli',
          ],
      },
      zip_safe=False)
