"""
Utility functions for exporting data to CSV format.
Used by HR managers to download application and job reports.
"""

import csv
import io
from datetime import date, datetime
from typing import Dict, Iterable

from hiretrack.models.application import JobApplication
from hiretrack.models.job import Job


def _day(value) -> str:
    if isinstance(value, (datetime, date)):
        return value.strftime('%Y-%m-%d')
    return ''


def export_applications_to_csv(applications: Iterable[JobApplication]) -> str:
    """
    Export applications data to CSV format.

    Args:
        applications: Applications with their applicant and job loaded

    Returns:
        CSV string ready to be downloaded
    """

    # Create in-memory string buffer
    output = io.StringIO()

    fieldnames = [
        'ID',
        'Applicant Name',
        'Applicant Email',
        'Job Title',
        'Department',
        'Status',
        'Applied Date',
        'Reviewed Date',
        'Score',
    ]

    writer = csv.DictWriter(output, fieldnames=fieldnames, quoting=csv.QUOTE_ALL)
    writer.writeheader()

    for app in applications:
        applicant = app.applicant
        job = app.job
        writer.writerow({
            'ID': app.id,
            'Applicant Name': (applicant.full_name or '') if applicant else '',
            'Applicant Email': applicant.email if applicant else '',
            'Job Title': job.title if job else '',
            'Department': (job.department or '') if job else '',
            'Status': app.status,
            'Applied Date': _day(app.submitted_at or app.created_at),
            'Reviewed Date': _day(app.reviewed_at),
            'Score': '' if app.score is None else app.score,
        })

    csv_string = output.getvalue()
    output.close()

    return csv_string


def export_jobs_to_csv(jobs: Iterable[Job]) -> str:
    """
    Export jobs data to CSV format.

    Args:
        jobs: Job rows

    Returns:
        CSV string ready to be downloaded
    """

    output = io.StringIO()

    fieldnames = [
        'ID',
        'Title',
        'Department',
        'Location',
        'Job Type',
        'Status',
        'Created By',
        'Created Date',
        'Published Date',
        'Application Count',
    ]

    writer = csv.DictWriter(output, fieldnames=fieldnames, quoting=csv.QUOTE_ALL)
    writer.writeheader()

    for job in jobs:
        writer.writerow({
            'ID': job.id,
            'Title': job.title,
            'Department': job.department or '',
            'Location': job.location or '',
            'Job Type': job.type or '',
            'Status': job.status,
            'Created By': job.created_by.email if job.created_by else '',
            'Created Date': _day(job.created_at),
            'Published Date': _day(job.published_at),
            'Application Count': len(job.applications),
        })

    csv_string = output.getvalue()
    output.close()

    return csv_string


def create_csv_response_headers(filename: str) -> Dict[str, str]:
    """
    Create headers for CSV file download response.

    Args:
        filename: Name of the CSV file (without .csv extension)

    Returns:
        Dictionary of headers for FastAPI Response
    """

    return {
        "Content-Disposition": f"attachment; filename={filename}.csv",
        "Content-Type": "text/csv"
    }
