from setuptools import setup, find_packages

setup(
    name="refillstore",
    version="0.1.0",
    packages=find_packages(
        include=[
            "refillstore",
            "refillstore.*",
            "notebook_orders",
            "notebook_orders.*",
            "academic_calendars",
            "academic_calendars.*",
        ]
    ),
    include_package_data=True,
    package_data={
        "notebook_orders": ["templates/notebook_orders/*.html"],
    },
    install_requires=[
        "Django>=4.2",
        "djangorestframework>=3.14",
        "django-cors-headers>=4.0",
        "python-dotenv>=1.0",
        "stripe>=8.0",
        "requests>=2.31",
        "xhtml2pdf>=0.2.11",
    ],
    extras_require={
        "weasyprint": ["weasyprint>=60"],
        "pdfkit": ["pdfkit>=1.0"],
        "test": ["pytest>=7.4", "pytest-django>=4.5"],
    },
    author="Wayne",
    author_email="support@techwithwayne.com",
    description="Paid refill notebook store for Django: Stripe checkout, webhook ledger and fiscal-year PDF generation.",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://techwithwayne.com",
    license="MIT",
    classifiers=[
        "Framework :: Django",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "License :: OSI Approved :: MIT License"
    ],
    python_requires='>=3.9',
)
