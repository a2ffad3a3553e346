import re
from dataclasses import dataclass, field

TEAM_TYPES = ('srm', 'non_srm')
MIN_TEAM_SIZE = 3
MAX_TEAM_SIZE = 5
MAX_TEAM_NAME_LENGTH = 80
MAX_NAME_LENGTH = 100

RA_NUMBER_PATTERN = re.compile(r'^RA\d{13}$')
CONTACT_PATTERN = re.compile(r'^\d{10}$')


@dataclass
class TeamMember:
    name: str
    ra_number: str = None
    dept: str = None
    contact: str = None

    def to_dict(self):
        data = {'name': self.name}
        if self.ra_number:
            data['raNumber'] = self.ra_number
        if self.dept:
            data['dept'] = self.dept
        if self.contact:
            data['contact'] = self.contact
        return data


@dataclass
class TeamSubmission:
    team_name: str
    team_type: str
    lead: TeamMember
    members: list = field(default_factory=list)

    @property
    def member_count(self):
        return 1 + len(self.members)


def _clean(value):
    return value.strip() if isinstance(value, str) else ''


def _parse_member(data, team_type, label, is_lead=False):
    if not isinstance(data, dict):
        return None, f'{label} details are required'

    name = _clean(data.get('name'))
    if not name:
        return None, f'{label} name is required'
    if len(name) > MAX_NAME_LENGTH:
        return None, f'{label} name is too long'

    member = TeamMember(name=name)

    if team_type == 'srm':
        ra_number = _clean(data.get('raNumber')).upper()
        if not RA_NUMBER_PATTERN.match(ra_number):
            return None, f'{label} registration number must look like RA followed by 13 digits'
        dept = _clean(data.get('dept'))
        if not dept:
            return None, f'{label} department is required'
        member.ra_number = ra_number
        member.dept = dept

    if is_lead:
        contact = _clean(data.get('contact'))
        if not CONTACT_PATTERN.match(contact):
            return None, 'Team lead contact must be a 10 digit phone number'
        member.contact = contact

    return member, None


def validate_team_fields(data):
    """Validate the team name and type; returns (team_name, team_type, error)."""
    team_name = _clean(data.get('teamName'))
    if not team_name:
        return None, None, 'Team name is required'
    if len(team_name) > MAX_TEAM_NAME_LENGTH:
        return None, None, f'Team name must be at most {MAX_TEAM_NAME_LENGTH} characters'

    team_type = data.get('teamType')
    if team_type not in TEAM_TYPES:
        return None, None, 'Team type must be "srm" or "non_srm"'

    return team_name, team_type, None


def validate_team_submission(data):
    """Parse a team registration payload.

    Returns ``(submission, None)`` on success or ``(None, message)`` describing
    the first problem found.
    """
    if not isinstance(data, dict):
        return None, 'Invalid payload'

    team_name, team_type, error = validate_team_fields(data)
    if error:
        return None, error

    lead, error = _parse_member(data.get('lead'), team_type, 'Team lead', is_lead=True)
    if error:
        return None, error

    raw_members = data.get('members')
    if not isinstance(raw_members, list):
        return None, 'Members must be a list'

    total = 1 + len(raw_members)
    if total < MIN_TEAM_SIZE or total > MAX_TEAM_SIZE:
        return None, f'Teams must have {MIN_TEAM_SIZE}-{MAX_TEAM_SIZE} members including the lead'

    members = []
    for i, raw in enumerate(raw_members, 2):
        member, error = _parse_member(raw, team_type, f'Member {i}')
        if error:
            return None, error
        members.append(member)

    if team_type == 'srm':
        ra_numbers = [lead.ra_number] + [m.ra_number for m in members]
        if len(set(ra_numbers)) != len(ra_numbers):
            return None, 'Registration numbers must be unique within a team'

    return TeamSubmission(team_name=team_name, team_type=team_type, lead=lead, members=members), None
