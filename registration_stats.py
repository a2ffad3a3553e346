"""Registration analytics for the admin dashboard.

Everything here is a pure function over registration rows (``Team`` models
or anything with the same attributes) so it can be tested without a database.
"""
import csv
import io
from collections import Counter
from datetime import datetime, UTC

from problem_statements import PROBLEM_STATEMENT_CAP, PROBLEM_STATEMENTS

TEAM_TYPE_ORDER = ('srm', 'non_srm', 'unknown')
APPROVAL_STATUS_ORDER = ('accepted', 'rejected', 'submitted', 'invalid', 'not_reviewed')


def _percent(part, whole):
    return round(part / whole * 100, 2) if whole else 0


def normalize_email(email):
    return email.strip().lower() if isinstance(email, str) else ''


def normalize_team_type(value):
    return value if value in ('srm', 'non_srm') else 'unknown'


def normalize_approval_status(value):
    normalized = value.strip().lower() if isinstance(value, str) else ''
    return normalized if normalized in APPROVAL_STATUS_ORDER else 'not_reviewed'


def _as_utc(value):
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def statement_occupancy(counts, cap=PROBLEM_STATEMENT_CAP):
    """Per-statement fill figures from a ``{statement id: registrations}`` mapping."""
    rows = []
    for statement in PROBLEM_STATEMENTS:
        registered = counts.get(statement.id, 0)
        rows.append({
            'problemStatementId': statement.id,
            'title': statement.title,
            'cap': cap,
            'registeredTeams': registered,
            'remainingTeams': max(cap - registered, 0),
            'fillRatePercent': _percent(min(registered, cap), cap),
            'isFull': registered >= cap,
        })
    return rows


def build_registration_stats(rows, excluded_emails=(), cap=PROBLEM_STATEMENT_CAP, now=None):
    excluded = {normalize_email(email) for email in excluded_emails if normalize_email(email)}
    included = []
    excluded_rows = 0
    for row in rows:
        if normalize_email(row.registration_email) in excluded:
            excluded_rows += 1
            continue
        included.append(row)

    known_ids = {statement.id for statement in PROBLEM_STATEMENTS}
    statement_counts = Counter()
    team_types = Counter()
    approval_statuses = Counter()
    trend = Counter()
    unknown_statement_ids = 0
    total_participants = 0
    submitted = 0
    created = []

    for row in included:
        if row.problem_statement_id in known_ids:
            statement_counts[row.problem_statement_id] += 1
        else:
            unknown_statement_ids += 1

        team_types[normalize_team_type(row.team_type)] += 1
        approval_statuses[normalize_approval_status(row.approval_status)] += 1
        total_participants += row.member_count or 0
        if row.presentation_file_name:
            submitted += 1
        if row.created_at:
            created_at = _as_utc(row.created_at)
            created.append(created_at)
            trend[created_at.date().isoformat()] += 1

    total = len(included)
    per_statement = statement_occupancy(statement_counts, cap)
    capacity = cap * len(PROBLEM_STATEMENTS)
    filled = sum(min(item['registeredTeams'], cap) for item in per_statement)

    return {
        'event': {
            'statementCap': cap,
            'totalStatements': len(PROBLEM_STATEMENTS),
            'totalCapacity': capacity,
        },
        'filters': {
            'excludedRegistrationEmails': sorted(excluded),
            'excludedRows': excluded_rows,
            'includedRows': total,
        },
        'generatedAt': (now or datetime.now(UTC)).isoformat(),
        'requiredStats': {
            'totalTeamsRegistered': total,
            'registrationsPerProblemStatement': per_statement,
            'rateOfFilling': {
                'capacityTeams': capacity,
                'filledTeams': filled,
                'remainingTeams': capacity - filled,
                'overallPercent': _percent(filled, capacity),
            },
        },
        'additionalStats': {
            'anomalies': {'unknownProblemStatementId': unknown_statement_ids},
            'teamTypeBreakdown': [
                {'teamType': team_type, 'teams': team_types[team_type],
                 'percent': _percent(team_types[team_type], total)}
                for team_type in TEAM_TYPE_ORDER
            ],
            'approvalStatusBreakdown': [
                {'status': status, 'teams': approval_statuses[status],
                 'percent': _percent(approval_statuses[status], total)}
                for status in APPROVAL_STATUS_ORDER
            ],
            'participation': {
                'totalParticipants': total_participants,
                'averageTeamSize': round(total_participants / total, 2) if total else 0,
            },
            'presentationSubmission': {
                'submittedTeams': submitted,
                'pendingTeams': total - submitted,
                'submissionRatePercent': _percent(submitted, total),
            },
            'registrationTrendByDate': [
                {'date': date, 'registrations': trend[date]} for date in sorted(trend)
            ],
            'firstRegistrationAt': min(created).isoformat() if created else None,
            'lastRegistrationAt': max(created).isoformat() if created else None,
        },
    }


def export_statement_results_csv(rows, cap=PROBLEM_STATEMENT_CAP):
    """CSV of teams grouped by problem statement, in registration order."""
    by_statement = {}
    for row in rows:
        by_statement.setdefault(row.problem_statement_id, []).append(row)

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(['Problem Statement', 'Title', 'Slot', 'Team Name', 'Team Type',
                     'Lead Name', 'Members', 'Approval Status', 'Presentation Submitted',
                     'Registered At'])

    for statement in PROBLEM_STATEMENTS:
        teams = sorted(by_statement.get(statement.id, []), key=lambda t: _as_utc(t.created_at))
        for slot, team in enumerate(teams, 1):
            writer.writerow([
                statement.id,
                statement.title,
                f'{slot}/{cap}',
                team.team_name,
                normalize_team_type(team.team_type),
                team.lead_name,
                team.member_count,
                normalize_approval_status(team.approval_status),
                'yes' if team.presentation_file_name else 'no',
                _as_utc(team.created_at).isoformat(),
            ])

    return output.getvalue()
