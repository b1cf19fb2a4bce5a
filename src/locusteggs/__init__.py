"""Helpers for writing Locust load tests.

What follows here is a quick tour of the code.

Overview
========

A Locust load test consists of user classes whose tasks make requests
to the site under test. Those tasks usually need to check that the right
page was served and, for realistic load, fetch the static assets a
browser would fetch as well. This package provides those pieces, plus
helpers for the forms of Drupal sites.

Validation
==========

`locusteggs.validate.Validate` describes what a response should look like:
its status code, title, texts in the body, headers and whether the request
was redirected. `locusteggs.validate.validate_page` checks a response against
such a description and
`locusteggs.validate.validate_and_load_static_assets` additionally loads
the images, scripts and style sheets referenced by the page.

Responses must come from requests made with ``catch_response=True``.
When a check fails, `locusteggs.failure.set_failure` marks the response
as failed in the Locust statistics and raises
`locusteggs.failure.TransactionError`, which ends the current task.

Scraping
========

`locusteggs.page` extracts the head and title of a page and finds local
static assets. `locusteggs.drupal` extracts forms and form values, also from
BigPipe placeholders, and implements logging in and searching.
`locusteggs.text` generates random text to fill in forms with.

Example
=======

The ``examples/umami`` directory contains a complete load test for
Drupal's Umami demo site.
"""
