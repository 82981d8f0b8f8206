import re

# GitHub 유저네임: 1~39자, 영숫자와 단일 하이픈, 하이픈으로 시작/끝 불가
GITHUB_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}$")

USERNAME_REQUIRED_MESSAGE = "Username is required"
USERNAME_FORMAT_MESSAGE = "Invalid GitHub username format"
NO_REPOSITORIES_MESSAGE = "No public repositories found"

DEFAULT_TECH = "Not specified"
DEFAULT_DESCRIPTION = "No description provided"
NO_README_EXCERPT = "No README available"

SKILL_SCORING_BYTES = "bytes"
