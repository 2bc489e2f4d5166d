"""
What did you commit last week, month, quarter, year?

Gather commits of all branches of a git repository for the given
week, month, quarter, year or selected date range and render them as
a report grouped by branch. Each commit is listed exactly once, under
the first branch in which it has been found.

The `base`_ module contains exceptions, config and the date range
resolution. The `commits`_ module holds the commit aggregation, git
access lives in the `git`_ module and the `report`_ module renders
the results. Option parsing and other command line stuff resides in
the `cli`_ module.
"""
