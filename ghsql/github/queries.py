"""GraphQL documents for the GitHub Projects (v2) API."""

from __future__ import annotations


ITEMS_PAGE_SIZE = 100

LIST_FIELDS = """
query ListFields($owner: String!, $projectNumber: Int!) {
  organization(login: $owner) {
    projectV2(number: $projectNumber) {
      ...ProjectFields
    }
  }
  user(login: $owner) {
    projectV2(number: $projectNumber) {
      ...ProjectFields
    }
  }
}

fragment ProjectFields on ProjectV2 {
  id
  fields(first: 100) {
    nodes {
      __typename
      ... on ProjectV2Field {
        id
        name
        dataType
      }
      ... on ProjectV2IterationField {
        id
        name
        dataType
        configuration {
          duration
          startDay
          iterations {
            id
            title
            duration
            startDate
          }
          completedIterations {
            id
            title
            duration
            startDate
          }
        }
      }
      ... on ProjectV2SingleSelectField {
        id
        name
        dataType
        options {
          id
          name
        }
      }
    }
  }
}
"""

LIST_ITEMS = (
    """
query ListItems($projectId: ID!, $after: String) {
  node(id: $projectId) {
    __typename
    ... on ProjectV2 {
      items(first: %d, after: $after) {
        pageInfo {
          endCursor
          hasNextPage
        }
        nodes {
          id
          content {
            __typename
            ... on DraftIssue {
              title
              assignees(first: 20) { nodes { login } }
            }
            ... on Issue {
              title
              number
              repository { nameWithOwner }
              assignees(first: 20) { nodes { login } }
              labels(first: 20) { nodes { name } }
            }
            ... on PullRequest {
              title
              number
              repository { nameWithOwner }
              assignees(first: 20) { nodes { login } }
              labels(first: 20) { nodes { name } }
            }
          }
          fieldValues(first: 50) {
            nodes {
              __typename
              ... on ProjectV2ItemFieldDateValue {
                date
                field { ...FieldRef }
              }
              ... on ProjectV2ItemFieldIterationValue {
                title
                iterationId
                field { ...FieldRef }
              }
              ... on ProjectV2ItemFieldLabelValue {
                labels(first: 20) { nodes { name } }
                field { ...FieldRef }
              }
              ... on ProjectV2ItemFieldMilestoneValue {
                milestone { title }
                field { ...FieldRef }
              }
              ... on ProjectV2ItemFieldNumberValue {
                number
                field { ...FieldRef }
              }
              ... on ProjectV2ItemFieldPullRequestValue {
                pullRequests(first: 20) { nodes { title } }
                field { ...FieldRef }
              }
              ... on ProjectV2ItemFieldRepositoryValue {
                repository { name }
                field { ...FieldRef }
              }
              ... on ProjectV2ItemFieldReviewerValue {
                reviewers(first: 20) {
                  nodes {
                    __typename
                    ... on User { login }
                    ... on Team { name }
                  }
                }
                field { ...FieldRef }
              }
              ... on ProjectV2ItemFieldSingleSelectValue {
                name
                optionId
                field { ...FieldRef }
              }
              ... on ProjectV2ItemFieldTextValue {
                text
                field { ...FieldRef }
              }
              ... on ProjectV2ItemFieldUserValue {
                users(first: 20) { nodes { login } }
                field { ...FieldRef }
              }
            }
          }
        }
      }
    }
  }
}

fragment FieldRef on ProjectV2FieldConfiguration {
  ... on ProjectV2FieldCommon {
    id
  }
}
"""
    % ITEMS_PAGE_SIZE
)

UPDATE_ITEM_FIELD = """
mutation UpdateItemField(
  $projectId: ID!
  $itemId: ID!
  $fieldId: ID!
  $value: ProjectV2FieldValue!
) {
  updateProjectV2ItemFieldValue(
    input: {projectId: $projectId, itemId: $itemId, fieldId: $fieldId, value: $value}
  ) {
    projectV2Item {
      id
    }
  }
}
"""

DELETE_ITEM = """
mutation DeleteItem($projectId: ID!, $itemId: ID!) {
  deleteProjectV2Item(input: {projectId: $projectId, itemId: $itemId}) {
    deletedItemId
  }
}
"""
