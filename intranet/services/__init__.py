# Services package.
#
# Each module exposes async functions (or, for the event services, a small
# class) that encapsulate business logic and database access for a single
# domain aggregate:
#
#   organization_service          — organizations and their offices
#   user_service                  — users and notification preferences
#   post_service                  — walls, posts and post watchers
#   comment_service               — comment creation and lookup
#   comment_notification_service  — e-mails to watchers and mentioned users
#   event_validation_service      — event date / capacity / option rules
#   event_listing_service         — event queries for listings and details
#   event_service                 — event creation and participation
#   lottery_service               — lottery creation and listing
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.
