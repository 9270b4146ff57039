from tinybench.cases import element_loop, index_loop, make_fixture

arr = make_fixture(1_000_000)
# tinybench start
index_loop(arr)
# tinybench stop

# tinybench start
element_loop(arr)
# tinybench stop
