ROUTER_MUTATION_COUNT = "router_mutation_count"
LINK_MUTATION_COUNT = "link_mutation_count"
PATH_QUERY_COUNT = "path_query_count"
PATH_QUERY_SECONDS_SUM = "path_query_seconds_sum"
