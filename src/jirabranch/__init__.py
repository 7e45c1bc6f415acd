"""Create git branches from Jira tickets."""
